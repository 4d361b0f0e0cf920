"""
Example: Skill update with Gaussian messages.

A player's skill belief is combined with a performance message, and the
previous message is removed again by division (the cavity step of
expectation propagation).
"""

from bpmsg import GaussianMessage, log_norm_product, log_norm_ratio


def main():
    # Prior skill belief: mean 25, variance (25/3)^2
    prior = GaussianMessage.from_mean_variance(25.0, (25.0 / 3.0) ** 2)

    # Message from a game outcome factor
    game = GaussianMessage.from_mean_variance(30.0, 16.0)

    posterior = prior * game
    print(f"Prior:     {prior}")
    print(f"Game:      {game}")
    print(f"Posterior: {posterior}")

    # Evidence contributed by the game message
    print(f"\nlog Z (product) = {log_norm_product(prior, game):.6f}")

    # Remove the game message again
    cavity = posterior / game
    print(f"\nCavity:    {cavity}")
    print(f"log Z (ratio)   = {log_norm_ratio(posterior, game):.6f}")


if __name__ == "__main__":
    main()
