from .aggregator import Aggregator, AggregatorState
from .cancellation import CancellationSignal
from .completion import CompletionCounter
from .gate import ConcurrencyGate
from .report_service import SizeUnit, format_totals
from .scan_service import ScanService
from .stream import SizeEventStream
from .traversal import ScanContext, read_directory, walk_dir


__all__ = [
    'Aggregator',
    'AggregatorState',
    'CancellationSignal',
    'CompletionCounter',
    'ConcurrencyGate',
    'SizeUnit',
    'format_totals',
    'ScanService',
    'SizeEventStream',
    'ScanContext',
    'read_directory',
    'walk_dir',
]
