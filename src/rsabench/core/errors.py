class PrimeGenerationError(RuntimeError):
    pass


class KeyGenerationError(RuntimeError):
    pass


class NotInvertibleError(ArithmeticError):
    pass


class EmptySampleSetError(ValueError):
    pass


class OutOfRangeInputError(ValueError):
    pass


# Interop error classes
class InvalidKeyFormatError(ValueError):
    pass


class LibraryOperationError(RuntimeError):
    pass
