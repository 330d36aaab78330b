"""
PRA and resolution plan enumerations
"""
import enum


class PraStatus(str, enum.Enum):
    REVIEW = 'review'
    APPROVED = 'approved'
    QUERY = 'query'
    REJECTED = 'rejected'


class GroupType(str, enum.Enum):
    STANDALONE = 'standalone'
    CONSORTIUM = 'consortium'
    GROUP = 'group'


class PlanStatus(str, enum.Enum):
    SUBMITTED = 'submitted'
    UNDER_REVIEW = 'under_review'
    APPROVED = 'approved'
    REJECTED = 'rejected'
