from fixtures.general import *
from fixtures.w3 import *
from fixtures.services import *
