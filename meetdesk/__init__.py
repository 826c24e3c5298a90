"""MeetDesk - meeting productivity backend."""
