"""Analysis passes for callcycle.

Currently this holds the call-cycle analysis: call graph construction under a
namespace filter and ignore list, and cycle detection over the result.
"""

from . import cycles
