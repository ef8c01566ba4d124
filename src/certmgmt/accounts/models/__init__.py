from .account import Account, UserRole

__all__ = ['Account', 'UserRole']
