## forward imports from core gmreval utility sub-packages
from . import errors
from . import density
from . import metric_utils
from . import config
