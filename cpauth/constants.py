"""Fixed group constants shared by the prover and the verifier."""

# Safe prime p = 2q + 1; g and h are quadratic residues, so both generate
# the subgroup of order q.
BIT_SIZE = 256
P = 42765216643065397982265462252423826320512529931694366715111734768493812630447
Q = 21382608321532698991132731126211913160256264965847183357555867384246906315223
G = 4
H = 9

ID_BYTES = 16
DEFAULT_SERVER_URL = "http://127.0.0.1:8000"
ENV_PREFIX = "CPAUTH_"
