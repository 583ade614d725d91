from .moment import BirthOrObservationMoment, BirthInput
from .panchang import PanchangConfig, PanchangRequest, PanchangResponse, PanchangCalculations
from .calculators import MoonSignResponse, KundliResponse
