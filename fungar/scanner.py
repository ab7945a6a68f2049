import logging
from collections import namedtuple

from fungar.alignment import AlignmentRecord, open_alignments
from fungar.errors import MalformedRecord, MissingStream
from fungar.refiner import Filters

logger = logging.getLogger(__name__)

Finding = namedtuple("Finding", ["sample", "gene", "position", "reference", "mutation", "compound", "source"])


def map_position(start, end, position):
    """ Map a 1-based reference position onto a 0-based offset into an aligned segment running from *start* to
    *end*. Works for both orientations; returns None when the position is outside the aligned region. """
    if start <= end:
        if start <= position <= end:
            return position - start
    elif end <= position <= start:
        return start - position
    return None


class Scanner:
    """
    Matches alignment records against a MutationCatalog.

    One Scanner can scan any number of streams; statistics accumulate over all of them. The catalog is only read.
    """

    def __init__(self, catalog, filters=None, report_number=1000000):
        self.catalog = catalog
        self.filters = Filters() if filters is None else filters
        self.report_number = report_number
        self.categories = ("records", "malformed", "filtered", "unmatched_gene", "findings")
        self.read_numbers = {key: 0 for key in self.categories}

    def match_record(self, record, source):
        """ Yield a Finding for each catalog mutation of the record's gene observed in its aligned segment """
        for entry in self.catalog.get(record.ref_name, ()):
            offset = map_position(record.ref_start, record.ref_end, entry.position)
            if offset is None:
                continue
            if record.residue_at(offset) == entry.mutation:
                yield Finding(record.name, record.ref_name, entry.position, entry.reference, entry.mutation,
                              entry.compound, source)

    def scan(self, stream, source):
        """ Lazily scan one open alignment stream, yielding Findings labelled with *source* """
        for i, line in enumerate(stream):
            if i and i % self.report_number == 0:
                logger.info("{}: processed {} records, {} findings so far".format(
                    source, i, self.read_numbers["findings"]))
            line = line.rstrip("\r\n")
            if not line.strip():
                continue
            self.read_numbers["records"] += 1
            try:
                record = AlignmentRecord(line)
            except MalformedRecord as e:
                self.read_numbers["malformed"] += 1
                logger.debug("{}: skipping line {}: {}".format(source, i + 1, e))
                continue
            passed, failed = self.filters.test(record)
            if not passed:
                self.read_numbers["filtered"] += 1
                logger.debug("{}: {} below minimum {}".format(source, repr(record), failed))
                continue
            if record.ref_name not in self.catalog:
                self.read_numbers["unmatched_gene"] += 1
                continue
            for finding in self.match_record(record, source):
                self.read_numbers["findings"] += 1
                yield finding

    def scan_file(self, path, source):
        """ Scan an alignment file. A missing file is logged and contributes no findings. """
        try:
            stream = open_alignments(path)
        except MissingStream as e:
            logger.warning("{} ({} contributes no findings)".format(e, source))
            return
        with stream:
            yield from self.scan(stream, source)

    def stats(self):
        return dict(self.read_numbers)


def scan(stream, source, catalog, filters=None):
    return Scanner(catalog, filters=filters).scan(stream, source)


def scan_file(path, source, catalog, filters=None):
    return Scanner(catalog, filters=filters).scan_file(path, source)
