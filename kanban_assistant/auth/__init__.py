"""Authentication and board access"""
