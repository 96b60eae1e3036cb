"""Application layer - services, use cases, interfaces, and DTOs.

Import from the subpackages directly; this package stays import-light
because the orchestration layer depends on `interfaces` and `dtos`.
"""
