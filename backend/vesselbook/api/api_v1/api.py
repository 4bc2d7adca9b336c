"""V1 API router aggregation"""
from fastapi import APIRouter

from vesselbook.api.api_v1.endpoints import (
    vessels, settings, vat_profiles, categories, crew_positions, crew_members,
    suppliers, bank_accounts, transactions, recurring_transactions, maintenances,
    distribution_profiles, reports, dashboard, audit_logs, recycle_bin,
)
from vesselbook.api.api_v1.endpoints.mareas import router as mareas_router

api_router = APIRouter()

VESSEL = "/vessels/{vessel_id}"

# Global
api_router.include_router(vessels.router, prefix="/vessels", tags=["Vessels"])
api_router.include_router(vat_profiles.router, prefix="/vat-profiles", tags=["VAT profiles"])

# Vessel scoped
api_router.include_router(settings.router, prefix=f"{VESSEL}/settings", tags=["Vessel settings"])
api_router.include_router(dashboard.router, prefix=f"{VESSEL}/dashboard", tags=["Dashboard"])
api_router.include_router(categories.router, prefix=f"{VESSEL}/categories", tags=["Categories"])
api_router.include_router(crew_positions.router, prefix=f"{VESSEL}/crew-positions", tags=["Crew"])
api_router.include_router(crew_members.router, prefix=f"{VESSEL}/crew", tags=["Crew"])
api_router.include_router(suppliers.router, prefix=f"{VESSEL}/suppliers", tags=["Suppliers"])
api_router.include_router(bank_accounts.router, prefix=f"{VESSEL}/bank-accounts", tags=["Bank accounts"])
api_router.include_router(transactions.router, prefix=f"{VESSEL}/transactions", tags=["Transactions"])
api_router.include_router(
    recurring_transactions.router, prefix=f"{VESSEL}/recurring-transactions", tags=["Recurring transactions"]
)
api_router.include_router(mareas_router, prefix=f"{VESSEL}/mareas", tags=["Mareas"])
api_router.include_router(
    distribution_profiles.router, prefix=f"{VESSEL}/distribution-profiles", tags=["Distribution profiles"]
)
api_router.include_router(maintenances.router, prefix=f"{VESSEL}/maintenances", tags=["Maintenances"])
api_router.include_router(reports.router, prefix=f"{VESSEL}/reports", tags=["Reports"])
api_router.include_router(audit_logs.router, prefix=f"{VESSEL}/audit-logs", tags=["Audit logs"])
api_router.include_router(recycle_bin.router, prefix=f"{VESSEL}/recycle-bin", tags=["Recycle bin"])
