# Loaders package init
"""
Startup-time assembly: `bootstrap` sequences the process start, `http` builds
the request pipeline.
"""
