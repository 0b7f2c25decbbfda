import hashlib
import json

from ktx2pack.container.assembler import assemble_container_with_plan
from ktx2pack.manifest import build_manifest, manifest_dict


def test_manifest_describes_container(tmp_path):
    container, plan = assemble_container_with_plan(
        [bytes(256), bytes(64)], 8, 8, 0, 0, False, 43
    )
    job = tmp_path / "tex.yaml"
    d = manifest_dict(plan, container, job_path=job)
    assert d["version"] == 1
    assert d["file_size"] == len(container)
    assert d["sha256"] == hashlib.sha256(container).hexdigest()
    assert d["header"]["format_name"] == "R8G8B8A8_SRGB"
    assert d["header"]["level_count"] == 2
    assert d["statistics"]["uncompressed_total"] == 320
    assert d["job"] == "tex.yaml"


def test_build_manifest_writes_json(tmp_path):
    container, plan = assemble_container_with_plan(
        [bytes(16)], 2, 2, 0, 0, False, 37
    )
    path = build_manifest(plan, container, tmp_path / "nested" / "m.json")
    data = json.loads(path.read_text(encoding="utf-8"))
    assert "job" not in data
    assert data["levels"][0]["byte_offset"] == plan.levels[0].byte_offset
