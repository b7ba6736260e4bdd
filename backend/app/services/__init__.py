# Services package init
"""
MailChimp Sync Backend — Services Layer
=========================================

What:  Business logic between the routes (HTTP) and the repositories.
How:   Each service receives the request-scoped session per call and talks
       to MailChimp through a RemoteClient injected at construction.

Service Inventory:
    - RemoteClient (abstract): What the synchronizers need from the provider
    - MailChimpClient: httpx implementation against the Marketing API v3.0
    - MemberService: Write-through create / update / remove of members
    - ListService: Write-through create / update / remove of lists

Services never build HTTP responses; they raise MailChimpSyncError
subclasses and the handlers in app.main turn them into status codes.
"""
