from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from src.infra.redaction import redact, redact_value


@dataclass(frozen=True)
class ToolContext:
    """Per-dispatch context handed to output transformers by the Dispatcher.

    account: resolved alias, or None for tools that need no account.
    arguments: validated arguments (after any lookup step).
    credential: the token injected into the child. Transformers MUST pass
    every forwarded string through redact()/redact_payload().
    """

    tool_name: str
    account: str | None = None
    arguments: dict[str, Any] = field(default_factory=dict)
    credential: str | None = field(default=None, repr=False)

    def redact(self, text: str) -> str:
        if not self.credential:
            return text
        return redact(text, (self.credential,))

    def redact_payload(self, payload: Any) -> Any:
        if not self.credential:
            return payload
        return redact_value(payload, (self.credential,))
