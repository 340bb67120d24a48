"""Single-use pipeline handles (Session -> Endpoint -> Plan)."""

from pctl.exceptions import HandleConsumedError


class ConsumableHandle:
    """
    Base for values that are handed over to the next pipeline stage.

    Once consumed, every further use raises HandleConsumedError so a stale
    session or endpoint can never issue requests again.
    """

    handle_label = "handle"

    def __init__(self):
        self._consumed = False

    @property
    def consumed(self) -> bool:
        return self._consumed

    def ensure_live(self) -> None:
        if self._consumed:
            raise HandleConsumedError(
                f"This {self.handle_label} has already been used",
                context=f"A {self.handle_label} can only be turned into the next stage once",
            )

    def consume(self) -> None:
        self.ensure_live()
        self._consumed = True
