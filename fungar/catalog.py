import logging
import os
from collections import namedtuple

import pandas as pd
from Bio.Data.IUPACData import protein_letters
from Bio.SeqUtils import seq1

from fungar.errors import ParseError, SchemaError
from fungar.globals import CATALOG_REQUIRED, COMPOUND_ALIASES

logger = logging.getLogger(__name__)

MutationRecord = namedtuple("MutationRecord", ["gene", "position", "reference", "mutation", "compound"])

#: Residues accepted without a warning; '*' marks a stop codon.
VALID_RESIDUES = set(protein_letters) | {"*"}


class MutationCatalog(dict):
    """ Maps a gene name to the ordered list of its MutationRecords.

    Built once by construct() and only read afterwards, so one catalog can be shared by every scanned stream.
    """
    __slots__ = ["file"]

    def __init__(self, *args, **kwargs):
        super(MutationCatalog, self).__init__(*args, **kwargs)
        self.file = None

    def construct(self, filename):
        """ Fill the catalog from a delimited mutation table.

        Raises SchemaError when a required column is missing and ParseError when a position is not a positive
        integer. Either one leaves the catalog unusable. """
        self.file = filename
        table = read_catalog_table(filename)
        for i, row in enumerate(table.itertuples(index=False), start=2):  # row 1 is the header
            record = MutationRecord(
                gene=row.gene,
                position=parse_position(row.position, filename, i),
                reference=normalize_residue(row.reference),
                mutation=normalize_residue(row.mutation),
                compound=row.compound,
            )
            for residue in (record.reference, record.mutation):
                if residue not in VALID_RESIDUES:
                    logger.warning("{}: row {} has unrecognised residue '{}' for {}".format(
                        filename, i, residue, record.gene))
            self.setdefault(record.gene, []).append(record)
        return True

    def genes(self):
        return list(self.keys())

    @property
    def n_mutations(self):
        return sum(len(v) for v in self.values())

    def __str__(self):
        return "Mutation catalog {0} with {1} mutations in {2} genes".format(
            self.file, self.n_mutations, len(self))


def read_catalog_table(filename):
    """ Read the catalog with pandas, returning a frame with lower-case columns gene, position, reference,
    mutation and compound. All cells are kept as strings. """
    sep = "\t" if os.path.splitext(filename)[1].lower() in (".tsv", ".tab") else ","
    try:
        table = pd.read_csv(filename, sep=sep, dtype=str, keep_default_na=False, skipinitialspace=True)
    except pd.errors.EmptyDataError:
        raise SchemaError("{} is missing required columns: {}".format(
            filename, ", ".join(CATALOG_REQUIRED + COMPOUND_ALIASES[:1]))) from None
    table.columns = [str(c).strip().lower() for c in table.columns]

    compound_col = next((c for c in COMPOUND_ALIASES if c in table.columns), None)
    missing = [c for c in CATALOG_REQUIRED if c not in table.columns]
    if compound_col is None:
        missing.append(COMPOUND_ALIASES[0])
    if missing:
        raise SchemaError("{} is missing required columns: {}".format(filename, ", ".join(missing)))

    table = table[CATALOG_REQUIRED + [compound_col]].rename(columns={compound_col: "compound"})
    table = table.apply(lambda col: col.str.strip())
    return table[(table != "").any(axis=1)]


def parse_position(value, filename, row):
    try:
        position = int(value)
    except ValueError:
        raise ParseError("{}: row {} has non-numeric position '{}'".format(filename, row, value)) from None
    if position < 1:
        raise ParseError("{}: row {} has position {}, positions are 1-based".format(filename, row, position))
    return position


def normalize_residue(residue):
    """ Upper-case one-letter amino acid; three-letter codes such as 'Phe' are converted.
    Unknown three-letter codes are returned unchanged so they show up as unrecognised. """
    residue = residue.strip()
    if len(residue) == 3 and residue.isalpha():
        code = seq1(residue)
        if code != "X" or residue.upper() == "XAA":
            return code
    return residue.upper()


def load_catalog(filename):
    catalog = MutationCatalog()
    catalog.construct(filename)
    logger.info(str(catalog))
    return catalog
