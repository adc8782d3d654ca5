"""Internal APIs for procshell.

Note
----
This is an internal API not covered by versioning policy.
"""
