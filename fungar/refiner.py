from fungar import configuration


class Filters:
    """ Minimum thresholds an alignment record must meet before it is matched against the catalog.

    *min_pident* is compared to AlignmentRecord.pident and *min_length* to AlignmentRecord.length.
    """

    def __init__(self, min_pident=configuration.MIN_PIDENT, min_length=configuration.MIN_LENGTH):
        self.thresholds = {"pident": float(min_pident), "length": int(min_length)}

    def test(self, record):
        """ Returns a length 2 tuple: whether the record passes, and the name of the failed filter or None """
        for name, minimum in self.thresholds.items():
            if getattr(record, name) < minimum:
                return False, name
        return True, None
