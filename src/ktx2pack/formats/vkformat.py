"""VkFormat codes recognised by the format registry.

Values follow the Vulkan ``VkFormat`` enumeration, which KTX2 uses for its
``vkFormat`` header field.
"""

from __future__ import annotations

from enum import IntEnum

__all__ = ["VkFormat", "format_name"]


class VkFormat(IntEnum):
    UNDEFINED = 0

    R8_UNORM = 9
    R8_SNORM = 10
    R8_UINT = 13
    R8_SINT = 14
    R8_SRGB = 15
    R8G8_UNORM = 16
    R8G8_SNORM = 17
    R8G8_UINT = 20
    R8G8_SINT = 21
    R8G8_SRGB = 22
    R8G8B8_UNORM = 23
    R8G8B8_SNORM = 24
    R8G8B8_UINT = 27
    R8G8B8_SINT = 28
    R8G8B8_SRGB = 29
    B8G8R8_UNORM = 30
    B8G8R8_SNORM = 31
    B8G8R8_UINT = 34
    B8G8R8_SINT = 35
    B8G8R8_SRGB = 36
    R8G8B8A8_UNORM = 37
    R8G8B8A8_SNORM = 38
    R8G8B8A8_UINT = 41
    R8G8B8A8_SINT = 42
    R8G8B8A8_SRGB = 43
    B8G8R8A8_UNORM = 44
    B8G8R8A8_SNORM = 45
    B8G8R8A8_UINT = 48
    B8G8R8A8_SINT = 49
    B8G8R8A8_SRGB = 50

    R16_UNORM = 70
    R16_SNORM = 71
    R16_UINT = 74
    R16_SINT = 75
    R16_SFLOAT = 76
    R16G16_UNORM = 77
    R16G16_SNORM = 78
    R16G16_UINT = 81
    R16G16_SINT = 82
    R16G16_SFLOAT = 83
    R16G16B16_UNORM = 84
    R16G16B16_SNORM = 85
    R16G16B16_UINT = 88
    R16G16B16_SINT = 89
    R16G16B16_SFLOAT = 90
    R16G16B16A16_UNORM = 91
    R16G16B16A16_SNORM = 92
    R16G16B16A16_UINT = 95
    R16G16B16A16_SINT = 96
    R16G16B16A16_SFLOAT = 97

    R32_UINT = 98
    R32_SINT = 99
    R32_SFLOAT = 100
    R32G32_UINT = 101
    R32G32_SINT = 102
    R32G32_SFLOAT = 103
    R32G32B32_UINT = 104
    R32G32B32_SINT = 105
    R32G32B32_SFLOAT = 106
    R32G32B32A32_UINT = 107
    R32G32B32A32_SINT = 108
    R32G32B32A32_SFLOAT = 109

    D16_UNORM = 124
    D32_SFLOAT = 126

    BC1_RGB_UNORM_BLOCK = 131
    BC1_RGB_SRGB_BLOCK = 132
    BC1_RGBA_UNORM_BLOCK = 133
    BC1_RGBA_SRGB_BLOCK = 134
    BC2_UNORM_BLOCK = 135
    BC2_SRGB_BLOCK = 136
    BC3_UNORM_BLOCK = 137
    BC3_SRGB_BLOCK = 138
    BC4_UNORM_BLOCK = 139
    BC4_SNORM_BLOCK = 140
    BC5_UNORM_BLOCK = 141
    BC5_SNORM_BLOCK = 142
    BC7_UNORM_BLOCK = 145
    BC7_SRGB_BLOCK = 146

    ETC2_R8G8B8_UNORM_BLOCK = 147
    ETC2_R8G8B8_SRGB_BLOCK = 148
    ETC2_R8G8B8A1_UNORM_BLOCK = 149
    ETC2_R8G8B8A1_SRGB_BLOCK = 150
    ETC2_R8G8B8A8_UNORM_BLOCK = 151
    ETC2_R8G8B8A8_SRGB_BLOCK = 152
    EAC_R11_UNORM_BLOCK = 153
    EAC_R11_SNORM_BLOCK = 154
    EAC_R11G11_UNORM_BLOCK = 155
    EAC_R11G11_SNORM_BLOCK = 156

    ASTC_4x4_UNORM_BLOCK = 157
    ASTC_4x4_SRGB_BLOCK = 158
    ASTC_5x4_UNORM_BLOCK = 159
    ASTC_5x4_SRGB_BLOCK = 160
    ASTC_5x5_UNORM_BLOCK = 161
    ASTC_5x5_SRGB_BLOCK = 162
    ASTC_6x5_UNORM_BLOCK = 163
    ASTC_6x5_SRGB_BLOCK = 164
    ASTC_6x6_UNORM_BLOCK = 165
    ASTC_6x6_SRGB_BLOCK = 166
    ASTC_8x5_UNORM_BLOCK = 167
    ASTC_8x5_SRGB_BLOCK = 168
    ASTC_8x6_UNORM_BLOCK = 169
    ASTC_8x6_SRGB_BLOCK = 170
    ASTC_8x8_UNORM_BLOCK = 171
    ASTC_8x8_SRGB_BLOCK = 172
    ASTC_10x5_UNORM_BLOCK = 173
    ASTC_10x5_SRGB_BLOCK = 174
    ASTC_10x6_UNORM_BLOCK = 175
    ASTC_10x6_SRGB_BLOCK = 176
    ASTC_10x8_UNORM_BLOCK = 177
    ASTC_10x8_SRGB_BLOCK = 178
    ASTC_10x10_UNORM_BLOCK = 179
    ASTC_10x10_SRGB_BLOCK = 180
    ASTC_12x10_UNORM_BLOCK = 181
    ASTC_12x10_SRGB_BLOCK = 182
    ASTC_12x12_UNORM_BLOCK = 183
    ASTC_12x12_SRGB_BLOCK = 184


def format_name(code: int) -> str:
    try:
        return VkFormat(code).name
    except ValueError:
        return f"VK_FORMAT_{code}"
