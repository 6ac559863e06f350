"""Reasons a room refuses an action.

Every rejection is handled the same way by the host: logged and dropped with
no state change and nothing sent back. The subclasses only exist so logs and
tests can tell the cases apart.
"""


class ActionRejected(Exception):
    def __init__(self, code: str, msg: str) -> None:
        super().__init__(msg)
        self.code = code
        self.msg = msg


class NotHost(ActionRejected):
    def __init__(self, action: str) -> None:
        super().__init__("NOT_HOST", f"Only the host may {action}")


class PreconditionFailed(ActionRejected):
    pass


class UnknownTarget(ActionRejected):
    pass
