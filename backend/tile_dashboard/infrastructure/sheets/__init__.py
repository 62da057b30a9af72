from .sheet_gateway import SheetGateway

__all__ = ["SheetGateway"]
