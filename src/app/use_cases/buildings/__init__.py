from .get_license_usage_use_case import GetLicenseUsageUseCase

__all__ = ["GetLicenseUsageUseCase"]
