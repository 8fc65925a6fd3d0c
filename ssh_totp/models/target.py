"""Target address data models."""

from dataclasses import dataclass


@dataclass(frozen=True)
class TargetAddress:
    """SSH destination as passed to the ssh client."""

    host: str
    username: str | None = None

    @classmethod
    def compose(cls, server: str, username: str | None = None) -> "TargetAddress":
        """Combine a server argument with an optional username.

        The username is only applied when the server does not already
        embed one.

        Args:
            server: "host" or "user@host"
            username: Optional username argument

        Returns:
            TargetAddress for the combined destination
        """
        if "@" in server:
            user, host = server.split("@", 1)
            return cls(host=host, username=user)
        return cls(host=server, username=username or None)

    def __str__(self) -> str:
        if self.username is None:
            return self.host
        return f"{self.username}@{self.host}"


@dataclass(frozen=True)
class Invocation:
    """Parsed command line."""

    target: TargetAddress
    namespace: str
