class VersificationError(Exception):
    pass


class FormatError(VersificationError, ValueError):
    """Raised for malformed input: bad signatures, headers, rule lines or
    mapping keys.
    """


class NotFoundError(VersificationError, LookupError):
    pass


class ConflictError(VersificationError):
    """Raised when the candidates for a best-match merge share no target for
    some source reference.
    """

    def __init__(self, source_name, target_name, reference):
        super().__init__(
            "Unable to build best match from %s to %s: No common subset "
            "found for %s" % (source_name, target_name, reference))
        self.source_name = source_name
        self.target_name = target_name
        self.reference = reference


class IntegrityError(VersificationError):
    pass
