class FungarError(Exception):
    """ Base class for all errors raised by fungar """


class SchemaError(FungarError):
    """ The mutation catalog is missing one or more required columns """


class ParseError(FungarError):
    """ A catalog value could not be parsed, e.g. a non-numeric position """


class MalformedRecord(FungarError):
    """ An alignment line that cannot be read as an AlignmentRecord. Non-fatal. """


class MissingStream(FungarError):
    """ An expected alignment file does not exist. Non-fatal. """


class InputError(FungarError):
    pass


class DependencyError(FungarError):
    pass
