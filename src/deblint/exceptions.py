from typing import cast


class DeblintRuntimeError(RuntimeError):
    @property
    def message(self) -> str:
        return cast("str", self.args[0])


class ControlFileStructureError(DeblintRuntimeError):
    pass


class PGPEnvelopeError(ControlFileStructureError):
    pass


class StageAlreadyRunError(DeblintRuntimeError):
    pass


class UnknownCheckError(DeblintRuntimeError):
    pass


class UnknownPresetError(DeblintRuntimeError):
    pass


class UnknownControlTypeError(DeblintRuntimeError):
    pass
