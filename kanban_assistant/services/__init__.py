"""Board persistence and the chat pipeline"""
