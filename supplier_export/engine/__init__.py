"""Engine components: plan → fetch pages → write rows."""

from .cancel import CancelToken
from .page_client import PageClient, PageFetch
from .payload import SUPPLIER_COLUMNS, RequestTemplate, build_headers
from .sink import ResultSink, SinkTotals
from .task_queue import PageDescriptor, TaskQueue, count_pages, plan_pages
from .worker_pool import PageResult, WorkerPool

__all__ = [
    "CancelToken",
    "PageClient",
    "PageDescriptor",
    "PageFetch",
    "PageResult",
    "RequestTemplate",
    "ResultSink",
    "SUPPLIER_COLUMNS",
    "SinkTotals",
    "TaskQueue",
    "WorkerPool",
    "build_headers",
    "count_pages",
    "plan_pages",
]
