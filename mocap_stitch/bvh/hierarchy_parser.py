"""Hierarchy section parser - builds the joint tree"""

from typing import List, Optional, Sequence
import numpy as np

from mocap_stitch.core import (
    get_logger,
    Joint,
    FormatError,
    DataError,
    KNOWN_CHANNELS,
    END_SITE_NAME,
    is_rotation_channel,
)


class HierarchyParser:
    """
    Recursive-descent parser for the HIERARCHY section.

    Expects trimmed, non-empty lines. Index 0 is the HIERARCHY keyword,
    which the caller has already checked; parsing starts at index 1.
    Lines that are not part of the grammar (comments, exporter metadata)
    are skipped.
    """

    def __init__(self, lines: Sequence[str], line_numbers: Optional[Sequence[int]] = None):
        self.logger = get_logger("bvh.hierarchy")
        self._lines = list(lines)
        self._line_numbers = list(line_numbers) if line_numbers is not None else None
        self._index = 1

    def parse(self) -> Joint:
        """Parse the whole section and return the root joint."""
        if self._index >= len(self._lines):
            raise FormatError("Hierarchy section has no ROOT declaration")

        declaration = self._lines[self._index]
        if not declaration.startswith("ROOT"):
            raise FormatError(
                f"Expected ROOT declaration, got {declaration!r}",
                self._source_line(self._index)
            )

        root = self._parse_joint()
        self.logger.debug(f"Parsed hierarchy rooted at {root.name!r}")
        return root

    def _source_line(self, index: int) -> Optional[int]:
        if self._line_numbers is None or index >= len(self._line_numbers):
            return None
        return self._line_numbers[index]

    def _parse_joint(self) -> Joint:
        declaration_index = self._index
        line = self._lines[self._index]
        self._index += 1

        is_end_site = line.startswith("End Site")
        if is_end_site:
            joint = Joint(END_SITE_NAME)
        else:
            parts = line.split()
            if len(parts) < 2:
                raise FormatError(
                    f"Joint declaration without a name: {line!r}",
                    self._source_line(declaration_index)
                )
            joint = Joint(parts[1])

        if self._index >= len(self._lines) or self._lines[self._index] != "{":
            raise FormatError(
                f"Expected block open after {line!r}",
                self._source_line(self._index)
            )
        self._index += 1

        while self._index < len(self._lines):
            line = self._lines[self._index]

            if line.startswith("OFFSET"):
                joint.offset = self._parse_offset(line)
                self._index += 1
            elif line.startswith("CHANNELS"):
                if is_end_site:
                    self.logger.warning("Ignoring CHANNELS declared on an End Site")
                else:
                    joint.channels = self._parse_channels(line, joint.name)
                self._index += 1
            elif line.startswith("JOINT") or line.startswith("End Site"):
                child = self._parse_joint()
                joint.add_child(child)
            elif line == "}":
                self._index += 1
                return joint
            else:
                self._index += 1

        raise FormatError(
            f"Unterminated block for joint {joint.name!r}",
            self._source_line(declaration_index)
        )

    def _parse_offset(self, line: str):
        tokens = line.split()[1:]
        if len(tokens) < 3:
            raise FormatError(
                f"OFFSET needs 3 values, got {len(tokens)}",
                self._source_line(self._index)
            )
        try:
            offset = np.array([float(token) for token in tokens[:3]], dtype=np.float64)
        except ValueError:
            raise DataError(
                f"Non-numeric OFFSET value in {line!r}",
                self._source_line(self._index)
            ) from None
        if not np.all(np.isfinite(offset)):
            raise DataError(
                f"Non-finite OFFSET value in {line!r}",
                self._source_line(self._index)
            )
        return offset

    def _parse_channels(self, line: str, joint_name: str) -> List[str]:
        tokens = line.split()[1:]
        if not tokens:
            raise FormatError("CHANNELS line without a count", self._source_line(self._index))

        # The count token is informational; the names that follow are authoritative
        declared, channels = tokens[0], tokens[1:]
        if not declared.isdigit() or int(declared) != len(channels):
            self.logger.warning(
                f"Joint {joint_name!r} declares {declared} channels but lists {len(channels)}"
            )

        for channel in channels:
            if channel not in KNOWN_CHANNELS:
                raise FormatError(
                    f"Unknown channel {channel!r} on joint {joint_name!r}",
                    self._source_line(self._index)
                )

        order = "".join(ch[0] for ch in channels if is_rotation_channel(ch))
        if len(order) not in (0, 3) or len(set(order)) != len(order):
            raise FormatError(
                f"Joint {joint_name!r} must declare 0 or 3 distinct rotation channels, got {order!r}",
                self._source_line(self._index)
            )
        if len(set(channels)) != len(channels):
            raise FormatError(
                f"Joint {joint_name!r} repeats a channel",
                self._source_line(self._index)
            )

        return channels


def parse_hierarchy(lines: Sequence[str], line_numbers: Optional[Sequence[int]] = None) -> Joint:
    """
    Parse a HIERARCHY section into a joint tree.

    Args:
        lines: Trimmed, non-empty lines, starting with the HIERARCHY keyword
        line_numbers: Optional source line numbers for error messages

    Returns:
        Root joint
    """
    return HierarchyParser(lines, line_numbers).parse()
