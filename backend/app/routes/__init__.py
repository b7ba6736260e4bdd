# Routes package init
"""
MailChimp Sync Backend — API Routes Package
=============================================

Route Inventory:
    - lists.py:    GET / POST          /lists
                   GET / PATCH / DELETE /lists/{list_id}
    - members.py:  GET / POST          /lists/{list_id}/members
                   GET / PATCH / DELETE /lists/{list_id}/members/{member_id}
    - health.py:   GET                 /health

Routes stay thin: take the path values and the JSON body, call the service,
return its result. Status codes for refusals come from the exception
handlers in app.main.
"""
