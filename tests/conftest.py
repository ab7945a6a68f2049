import os
import sys

import pytest

myPath = os.path.dirname(os.path.abspath(__file__))
sys.path.insert(0, myPath + '/../')

from fungar.catalog import load_catalog

CATALOG_CSV = """gene,position,reference,mutation,fungicide
ERG11,50,F,L,fluconazole
ERG11,132,Y,F,fluconazole
ERG11,132,Y,H,voriconazole
FKS1,641,F,S,caspofungin
"""


def alignment_line(qseqid, sseqid, sstart, send, seq, pident=98.5, length=None, extra=True):
    """ A DIAMOND --outfmt 6 line in the column order fungar asks the aligner for """
    if length is None:
        length = len(seq)
    fields = [qseqid, sseqid, str(pident), str(length), "1", "0", "1", str(3 * length), str(sstart), str(send),
              "1.2e-10", "55.1", seq]
    if extra:
        fields.append(seq)
    return "\t".join(fields)


@pytest.fixture
def make_line():
    return alignment_line


@pytest.fixture
def catalog_file(tmp_path):
    path = tmp_path / "Candida_albicans_gene_mutations.csv"
    path.write_text(CATALOG_CSV)
    return str(path)


@pytest.fixture
def catalog(catalog_file):
    return load_catalog(catalog_file)
