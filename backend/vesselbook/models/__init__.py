# Importing the package registers every table on Base.metadata

from vesselbook.models.vessel import Vessel, VesselSetting
from vesselbook.models.user import User, CrewPosition, SalaryCompensation
from vesselbook.models.access import VesselRoleAccess, VesselUserRole
from vesselbook.models.supplier import Supplier
from vesselbook.models.bank_account import BankAccount
from vesselbook.models.category import TransactionCategory
from vesselbook.models.vat_profile import VatProfile
from vesselbook.models.transaction import Transaction
from vesselbook.models.recurring_transaction import RecurringTransaction
from vesselbook.models.maintenance import Maintenance
from vesselbook.models.marea import Marea, MareaCrew, MareaQuantityReturn
from vesselbook.models.distribution import (
    MareaDistributionProfile, MareaDistributionProfileItem, MareaDistributionItem,
)
from vesselbook.models.audit_log import AuditLog

__all__ = [
    "Vessel",
    "VesselSetting",
    "User",
    "CrewPosition",
    "SalaryCompensation",
    "VesselRoleAccess",
    "VesselUserRole",
    "Supplier",
    "BankAccount",
    "TransactionCategory",
    "VatProfile",
    "Transaction",
    "RecurringTransaction",
    "Maintenance",
    "Marea",
    "MareaCrew",
    "MareaQuantityReturn",
    "MareaDistributionProfile",
    "MareaDistributionProfileItem",
    "MareaDistributionItem",
    "AuditLog",
]
