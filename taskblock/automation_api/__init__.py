"""
Automation bridge layer.
Builds JXA query programs for Things3 / OmniFocus and runs them via osascript.
"""

from .data_models import ItemQueryResult, ItemRecord, ItemType, NotFound
from .jxa_client import AutomationExecutionError, execute_jxa, fetch_items
from .query_builder import Backend, UnknownBackendError, build_query_script, get_backend
from .search_filters import FilterSpec, build_filter_spec
from .utils import escape_script_string

__all__ = [
    'AutomationExecutionError',
    'Backend',
    'FilterSpec',
    'ItemQueryResult',
    'ItemRecord',
    'ItemType',
    'NotFound',
    'UnknownBackendError',
    'build_filter_spec',
    'build_query_script',
    'escape_script_string',
    'execute_jxa',
    'fetch_items',
    'get_backend',
]
