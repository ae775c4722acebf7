"""
Exceptions personnalisées pour le lecteur de file d'attente.

Ces exceptions sont réservées aux erreurs de programmation (collaborateur
absent, configuration invalide). Les échecs attendus de la file d'attente
(élément introuvable, index hors limites) sont retournés sous forme de
résultats, voir core.results.
"""

class MusicPlayerException(Exception):
    """
    Exception de base pour toutes les erreurs du lecteur.
    
    Attributes:
        message (str): Message d'erreur détaillé
        code (int): Code d'erreur optionnel
    """
    def __init__(self, message: str, code: int = None):
        self.message = message
        self.code = code
        super().__init__(self.message)

class QueueError(MusicPlayerException):
    """
    Exception levée pour une utilisation invalide de la file d'attente.
    
    Examples:
        >>> raise QueueError("Piste sans identifiant")
    """
    pass

class MediaEngineError(MusicPlayerException):
    """
    Exception levée quand une commande est envoyée sans moteur audio.
    
    Examples:
        >>> raise MediaEngineError("Aucun moteur audio configuré", code=5001)
    """
    pass

class ConfigError(MusicPlayerException):
    """
    Exception levée pour une valeur de configuration invalide.
    
    Examples:
        >>> raise ConfigError("restart_threshold doit être positif")
    """
    pass
