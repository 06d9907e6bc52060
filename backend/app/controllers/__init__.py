# Controllers package init
"""
Transport-facing adapters: plain data in, ServiceResult → status + body out.
"""
