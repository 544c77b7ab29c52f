from .capacity import *
from .emitter import *
from .options import *
from .pattern import *
