"""
Files module - ingested FTP file records stored in OpenSearch.

Provides the FileRecord model, the document operations (insert, get,
delete, update) against an index, and the REST endpoints over them.
"""
