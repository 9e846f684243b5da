"""
chat_service package

Group chats, chat membership and messages. Users are known only by the id
in their verified token; this service keeps no user records of its own.
"""
