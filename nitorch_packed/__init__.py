"""Packed (symmetric and triangular) matrices and their arithmetic."""
from .errors import *
from .matrices import *
from .arith import *
from . import indexing, provider
