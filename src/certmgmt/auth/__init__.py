from .requester import Requester

__all__ = ['Requester']
