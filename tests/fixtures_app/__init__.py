"""
Sample application scanned by the test suite.

Each subpackage is a scan namespace:
- controllers: routes, including invalid and failing declarations
- filters: before/after hooks
- sockets: websocket endpoints, two of them misdeclared
- broken: a package with a submodule that fails to import
- oddpaths: route paths with unusual or unnamed parameters
- layered_filters: a filter class and its subclass in one package
"""
