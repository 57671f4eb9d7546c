import logging

from .equality import assert_equal, compare, equal
from .errors import EqualityCheckingError, EqualityError, MismatchReason
from .options import Options, TimeEqual
from .pytypes import SupportsEqualTo

__all__ = ['assert_equal', 'compare', 'equal', 'EqualityCheckingError', 'EqualityError', 'MismatchReason', 'Options',
           'TimeEqual', 'SupportsEqualTo']

logging.getLogger(__name__).addHandler(logging.NullHandler())
