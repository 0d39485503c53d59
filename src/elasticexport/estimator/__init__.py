"""批大小估算模块.

通过一次探测请求测量平均文档大小，按每页字节预算推算每页文档数。
"""

from .exceptions import EstimationError
from .tool import BatchSizeEstimator, compute_batch_size

__all__ = [
    "BatchSizeEstimator",
    "compute_batch_size",
    "EstimationError",
]
