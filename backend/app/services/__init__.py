# Services package init
"""
MessageWall Backend - Services Layer
======================================

Service Inventory:
    - LikePolicy (abstract): next like count from the current one
      (DirectionalPolicy, IncrementPolicy)
    - MessageService: list / create / like, with the configured policy and
      update strategy (read_write, atomic, optimistic)
"""
