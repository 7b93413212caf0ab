from __future__ import annotations

import zlib


def legacy_non_steam_game_id(game_name: str, executable_path: str) -> str:
    """Legacy 64-bit id Steam derives for a non-Steam game.

    IEEE CRC32 of the executable path (quotes included) followed by the game
    name, top bit set, shifted into the high word, with 0x02000000 as the low word.
    """
    crc = zlib.crc32((executable_path + game_name).encode("utf-8")) | 0x80000000
    return str(crc << 32 | 0x02000000)
