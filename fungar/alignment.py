from fungar.errors import MalformedRecord, MissingStream
from fungar.globals import MIN_ALIGNMENT_FIELDS


class AlignmentRecord:
    __slots__ = ["name", "ref_name", "pident", "length", "mismatches", "gap_openings", "start", "end",
                 "ref_start", "ref_end", "evalue", "bitscore", "aligned_seq", "ref_seq"]

    def __init__(self, text):
        fields = text.split(sep="\t")
        if len(fields) < MIN_ALIGNMENT_FIELDS:
            raise MalformedRecord("Alignment line has {} fields, at least {} required".format(
                len(fields), MIN_ALIGNMENT_FIELDS))
        self.name = fields[0]
        self.ref_name = fields[1]
        try:
            self.pident = float(fields[2])
            self.length = int(fields[3])
            self.mismatches = int(fields[4])
            self.gap_openings = int(fields[5])
            self.start = int(fields[6])
            self.end = int(fields[7])
            self.ref_start = int(fields[8])
            self.ref_end = int(fields[9])
            self.evalue = float(fields[10])
            self.bitscore = float(fields[11])
        except ValueError as e:
            raise MalformedRecord("Alignment line has a non-numeric coordinate or score: {}".format(e)) from e
        self.aligned_seq = fields[12]
        self.ref_seq = fields[13] if len(fields) > 13 else None

    def residue_at(self, offset):
        """ Residue of the aligned segment at a 0-based offset, or None when the segment is too short """
        if 0 <= offset < len(self.aligned_seq):
            return self.aligned_seq[offset]
        return None

    def __repr__(self):
        return "_".join([self.name, self.ref_name, str(self.ref_start), str(self.ref_end)])


def open_alignments(path):
    try:
        return open(path)
    except FileNotFoundError as e:
        raise MissingStream("Alignment file not found: {}".format(path)) from e
