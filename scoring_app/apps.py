from django.apps import AppConfig


class ScoringAppConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'scoring_app'

    def ready(self):
        from scoring_app.services.metric_rules import check_rule_weights
        check_rule_weights()
