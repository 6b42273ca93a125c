"""
==========
Interfaces
==========

Entry points for using ``sortition`` from code and from the command line.

"""
from sortition.interface.interactive import RandomnessContext
