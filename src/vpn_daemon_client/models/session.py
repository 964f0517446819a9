"""Connected VPN client sessions as reported by LIST."""

from __future__ import annotations

from dataclasses import dataclass, field

# Row tag used by the OpenVPN management interface ``status 2`` output,
# which the daemon may relay as-is.
CLIENT_LIST_TAG = "CLIENT_LIST"


@dataclass
class SessionEntry:
    """One LIST result line.

    A line is either a bare session identifier (``session-foo``) or a
    comma-separated ``CLIENT_LIST`` row. The first column after the
    optional tag is always the client's common name.
    """

    common_name: str
    real_address: str = ""
    virtual_address: str = ""
    fields: list[str] = field(default_factory=list)
    raw: str = ""

    def to_dict(self) -> dict:
        return {
            "common_name": self.common_name,
            "real_address": self.real_address,
            "virtual_address": self.virtual_address,
            "fields": list(self.fields),
        }

    @classmethod
    def from_line(cls, line: str) -> SessionEntry:
        raw = line.strip()
        fields = [part.strip() for part in raw.split(",")]
        if fields and fields[0] == CLIENT_LIST_TAG:
            fields = fields[1:]
        if not fields:
            fields = [""]

        return cls(
            common_name=fields[0],
            real_address=fields[1] if len(fields) > 1 else "",
            virtual_address=fields[2] if len(fields) > 2 else "",
            fields=fields,
            raw=raw,
        )
