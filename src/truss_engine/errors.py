"""Exceptions raised by the truss engine."""


class TrussError(Exception):
    """Base class for all truss engine errors."""


class TrussGraphError(TrussError, ValueError):
    """An invalid mutation of the truss graph was requested."""


class JointNotFoundError(TrussGraphError, KeyError):
    """A connection referenced a joint that is not part of the truss."""

    def __init__(self, joint_id: str):
        super().__init__(f"Joint '{joint_id}' is not part of the truss")
        self.joint_id = joint_id

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message
        return self.args[0]


class TrussFormatError(TrussError, ValueError):
    """Serialized truss data is malformed or internally inconsistent."""


class SingularSystemError(TrussError, RuntimeError):
    """The reduced stiffness system cannot be solved (mechanism or ill-posed)."""
