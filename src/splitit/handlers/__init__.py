from splitit.handlers.basic import basic_router
from splitit.handlers.bills import bills_router
from splitit.handlers.split import split_router

__all__ = ["basic_router", "bills_router", "split_router"]
