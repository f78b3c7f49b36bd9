"""Nerd-font glyphs prefixed to Process names."""

from __future__ import annotations


class Icons:
    """Icons shown in front of the item basename of a Process."""

    SPACE = " "
    DELETE = "\U000f01b4"  # nf-md-delete
    COPY = "\U000f018f"  # nf-md-content_copy
    CUT = "\U000f0190"  # nf-md-content_cut
    EXTRACT = "\U000f06eb"
    COMPRESS = "\U000f03d7"

    @classmethod
    def label(cls, icon: str, name: str) -> str:
        """Return ``icon + space + name``."""
        return f"{icon}{cls.SPACE}{name}"
