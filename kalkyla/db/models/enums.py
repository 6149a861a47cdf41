"""Domain enumerations shared by models, schemas and services."""

import enum


class UserRole(str, enum.Enum):
    SUPER_ADMIN = "SUPER_ADMIN"
    ORG_ADMIN = "ORG_ADMIN"
    CLOSER = "CLOSER"


class CalculationStatus(str, enum.Enum):
    DRAFT = "DRAFT"
    COMPLETE = "COMPLETE"
    ARCHIVED = "ARCHIVED"


class Elomrade(str, enum.Enum):
    """Swedish electricity price zones."""

    SE1 = "SE1"
    SE2 = "SE2"
    SE3 = "SE3"
    SE4 = "SE4"


class PropertyType(str, enum.Enum):
    VILLA = "VILLA"
    BOSTADSRATT = "BOSTADSRATT"
    LAGENHET = "LAGENHET"
    FORETAG = "FORETAG"


class InterestType(str, enum.Enum):
    BATTERY = "BATTERY"
    SOLAR = "SOLAR"
    BOTH = "BOTH"


class Budget(str, enum.Enum):
    UNDER_100K = "UNDER_100K"
    RANGE_100K_200K = "RANGE_100K_200K"
    OVER_200K = "OVER_200K"
    UNKNOWN = "UNKNOWN"


class Timeline(str, enum.Enum):
    ASAP = "ASAP"
    WITHIN_3_MONTHS = "WITHIN_3_MONTHS"
    WITHIN_6_MONTHS = "WITHIN_6_MONTHS"
    JUST_RESEARCHING = "JUST_RESEARCHING"


class LeadStatus(str, enum.Enum):
    NEW = "NEW"
    MATCHED = "MATCHED"
    CONTACTED = "CONTACTED"
    CONVERTED = "CONVERTED"
    CLOSED = "CLOSED"
