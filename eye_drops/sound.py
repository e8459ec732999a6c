"""Cross-platform notification chime using whatever the OS already ships."""
from __future__ import annotations

import platform
import subprocess

from loguru import logger

IS_MAC = platform.system() == "Darwin"
IS_WIN = platform.system() == "Windows"

LINUX_PLAYERS = [
    ["paplay", "/usr/share/sounds/freedesktop/stereo/message.oga"],
    ["aplay", "-q", "/usr/share/sounds/sound-icons/prompt.wav"],
]


def play_chime() -> None:
    """Play the system notification sound asynchronously. Silent if unavailable."""
    try:
        if IS_WIN:
            import winsound
            winsound.PlaySound("SystemAsterisk", winsound.SND_ALIAS | winsound.SND_ASYNC)
        elif IS_MAC:
            subprocess.Popen(["afplay", "/System/Library/Sounds/Glass.aiff"])
        else:  # Linux
            for cmd in LINUX_PLAYERS:
                try:
                    subprocess.Popen(cmd, stdout=subprocess.DEVNULL, stderr=subprocess.DEVNULL)
                    return
                except FileNotFoundError:
                    continue
            logger.debug("No audio player found for chime")
    except (OSError, RuntimeError) as e:
        logger.debug("Chime failed: {}", e)
