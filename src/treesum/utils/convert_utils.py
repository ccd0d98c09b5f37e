"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

utils/convert_utils.py
"""


class ConvertUtils:
    @staticmethod
    def seconds_to_human(seconds: int) -> str:
        """
        Convert whole seconds to a short human-readable duration:
        "<1 second", "1 second", "42 seconds", "75 seconds (1 minute)",
        "130 seconds (2 minutes, 10 seconds)".
        """
        seconds = int(seconds)
        if seconds < 1:
            return "<1 second"
        if seconds == 1:
            return "1 second"
        if seconds < 60:
            return f"{seconds} seconds"
        if seconds < 120:
            return f"{seconds} seconds (1 minute)"
        return f"{seconds} seconds ({seconds // 60} minutes, {seconds % 60} seconds)"
