"""EIP-4361 (Sign-In with Ethereum) message format."""

import re
from datetime import datetime

from pydantic import BaseModel, Field

HEADER_SUFFIX = " wants you to sign in with your Ethereum account:"

_FIELD_PATTERNS = {
    "uri": re.compile(r"^URI: (?P<value>\S+)$"),
    "version": re.compile(r"^Version: (?P<value>\S+)$"),
    "chain_id": re.compile(r"^Chain ID: (?P<value>\d+)$"),
    "nonce": re.compile(r"^Nonce: (?P<value>[a-zA-Z0-9]{8,})$"),
    "issued_at": re.compile(r"^Issued At: (?P<value>\S+)$"),
    "expiration_time": re.compile(r"^Expiration Time: (?P<value>\S+)$"),
}
_REQUIRED_FIELDS = ("uri", "version", "chain_id", "nonce", "issued_at")
_ADDRESS_PATTERN = re.compile(r"^0x[a-fA-F0-9]{40}$")


class SiweMessageError(ValueError):
    """Raised when a message does not follow the EIP-4361 format."""


class SiweMessage(BaseModel):
    """Structured Sign-In with Ethereum message."""

    domain: str
    address: str
    statement: str | None = None
    uri: str
    version: str = "1"
    chain_id: int = 1
    nonce: str
    issued_at: datetime
    expiration_time: datetime | None = Field(default=None)

    def prepare_message(self) -> str:
        """Render the message text the wallet signs."""
        lines = [f"{self.domain}{HEADER_SUFFIX}", self.address, ""]
        if self.statement:
            lines.extend([self.statement, ""])
        lines.extend(
            [
                f"URI: {self.uri}",
                f"Version: {self.version}",
                f"Chain ID: {self.chain_id}",
                f"Nonce: {self.nonce}",
                f"Issued At: {_format_time(self.issued_at)}",
            ]
        )
        if self.expiration_time is not None:
            lines.append(f"Expiration Time: {_format_time(self.expiration_time)}")
        return "\n".join(lines)

    @classmethod
    def parse(cls, text: str) -> "SiweMessage":
        """Parse message text.

        Args:
            text: Message text as signed by the wallet

        Returns:
            Parsed message

        Raises:
            SiweMessageError: If the text is malformed
        """
        lines = text.split("\n")
        if len(lines) < 3 or not lines[0].endswith(HEADER_SUFFIX):
            raise SiweMessageError("Missing sign-in header")

        domain = lines[0][: -len(HEADER_SUFFIX)]
        if not domain:
            raise SiweMessageError("Missing domain")

        address = lines[1]
        if not _ADDRESS_PATTERN.match(address):
            raise SiweMessageError("Invalid address line")

        if lines[2] != "":
            raise SiweMessageError("Expected blank line after address")

        index = 3
        statement = None
        if index < len(lines) and not lines[index].startswith("URI: "):
            statement = lines[index]
            index += 1
            if index >= len(lines) or lines[index] != "":
                raise SiweMessageError("Expected blank line after statement")
            index += 1

        values: dict[str, str] = {}
        for line in lines[index:]:
            for name, pattern in _FIELD_PATTERNS.items():
                match = pattern.match(line)
                if match:
                    if name in values:
                        raise SiweMessageError(f"Duplicate field: {name}")
                    values[name] = match.group("value")
                    break
            else:
                raise SiweMessageError(f"Unexpected line: {line!r}")

        missing = [name for name in _REQUIRED_FIELDS if name not in values]
        if missing:
            raise SiweMessageError(f"Missing fields: {', '.join(missing)}")

        try:
            return cls(
                domain=domain,
                address=address,
                statement=statement,
                uri=values["uri"],
                version=values["version"],
                chain_id=int(values["chain_id"]),
                nonce=values["nonce"],
                issued_at=_parse_time(values["issued_at"]),
                expiration_time=(
                    _parse_time(values["expiration_time"])
                    if "expiration_time" in values
                    else None
                ),
            )
        except ValueError as e:
            raise SiweMessageError(str(e)) from e


def _format_time(value: datetime) -> str:
    return value.isoformat().replace("+00:00", "Z")


def _parse_time(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00"))
