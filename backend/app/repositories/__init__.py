# Repositories package init
"""
MailChimp Sync Backend — Local Store
======================================

What:  Thin persistence gateways over the async SQLAlchemy session.
Why:   Services only need four capabilities from the database:
       find, find_by, persist, remove. Keeping them here lets service tests
       run against a real session without any HTTP machinery.

Repository Inventory:
    - ListRepository:   mail_chimp_lists
    - MemberRepository: mail_chimp_members (scoped lookups by list)
"""
