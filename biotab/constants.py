import numpy as np

STR_MISSING = "."

# Largest finite float64. Used for both the VCF QUAL column and the GFF
# score column when the text holds the "." marker.
FLOAT_MISSING = float(np.finfo(np.float64).max)
QUAL_MISSING = FLOAT_MISSING
SCORE_MISSING = FLOAT_MISSING

# POS/start/end of 0 means "not provided"
POS_MISSING = 0
ALLELE_MISSING = -1
PHASE_MISSING = 3

QUAL_FORMAT_FIXED = "f"
QUAL_FORMAT_EXPONENT = "e"
