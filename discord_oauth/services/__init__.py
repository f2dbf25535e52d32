from .flow_service import OAuthFlowService

__all__ = ["OAuthFlowService"]
