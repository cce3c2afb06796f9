class SurveyError(Exception):
    """Error base para excepciones del levantamiento"""
    pass


class TreeStructureError(SurveyError):
    """El árbol de infraestructura tiene una estructura inválida"""
    pass


class PricingError(SurveyError):
    """Error en el cálculo de precios"""
    pass


class UnknownCatalogKindError(SurveyError, ValueError):
    """Tipo de referencia de catálogo desconocido (solo 'product' o 'service')"""
    pass
